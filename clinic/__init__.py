"""Clinic application for the MHOMS services backend.

This package contains models, serializers, services, views and route
registrations for patients, doctors, appointments and authentication.
"""
