from dem_contact.operator.reset.force_reset import ForceReset
