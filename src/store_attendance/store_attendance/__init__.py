"""Store Attendance package.

Feature modules (users, stores, attendance, audits, ...) with a thin Flask
controller layer on top of service/repository layers. The attendance flow
itself lives in ``attendance.flow`` and has no Flask dependency.
"""
