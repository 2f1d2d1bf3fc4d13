"""Student Attendance package.

Organized by feature modules (students, attendance) with a thin Flask
controller layer on top of view-state, service and repository layers.
"""
