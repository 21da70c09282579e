"""
Entity schemas for the pets, appointments and pet_photos tables.

Row models parse what the backend returns; New* models are insert payloads
(no id or timestamps); *Update models carry any subset of mutable fields.
"""

from .appointment import Appointment, AppointmentStatus, AppointmentUpdate, NewAppointment
from .pet import NewPet, Pet, PetUpdate
from .photo import NewPetPhoto, PetPhoto

__all__ = [
    "Pet",
    "NewPet",
    "PetUpdate",
    "Appointment",
    "AppointmentStatus",
    "NewAppointment",
    "AppointmentUpdate",
    "PetPhoto",
    "NewPetPhoto",
]
