from dem_contact.solver.contact import ContactSolver, SimulationConfig
