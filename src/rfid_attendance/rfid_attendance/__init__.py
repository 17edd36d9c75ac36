"""Campus RFID attendance package.

Organized by feature modules (students, sections, attendance, ...) with a thin
Flask controller layer over service and repository layers.
"""
