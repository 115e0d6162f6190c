"""Presence System package.

RFID check-in/check-out engine for a school day-care. Organized by feature
modules (users, devices, checkin, ...) with a thin Flask controller layer and
service/repository layers behind it.
"""
