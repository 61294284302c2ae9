"""Kindergarten payroll package.

Attendance-to-payroll engine organized by feature modules (attendance, payroll,
staff, children, ...) with a thin Flask controller layer and service/repository
layers behind Protocol ports.
"""
