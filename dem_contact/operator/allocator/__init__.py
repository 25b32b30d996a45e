from dem_contact.operator.allocator.particle_allocator import ParticleAllocator
