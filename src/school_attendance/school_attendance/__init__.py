"""School Attendance package.

Students check in from their browser; the reported position is validated
against the school's geofence before attendance is recorded. Feature modules
(geofence, zones, attendance, reports, users, biometrics) sit behind a thin
Flask controller layer and service/repository layers.
"""
