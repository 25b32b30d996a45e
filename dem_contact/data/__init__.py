from dem_contact.data.particles import ParticleSet
