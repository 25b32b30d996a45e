from dem_contact.operator.contact.contact_force import (
    ContactForce,
    accumulate_contact_forces,
    STIFFNESS,
)
