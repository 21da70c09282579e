"""
petcare — typed async data access for the pet-management Supabase project.

Tables: pets, appointments, pet_photos. See petcare.services for the
operations and petcare.db for the client and its errors.
"""

__version__ = "0.1.0"
