"""
sdcsite – Senior Design/Capstone site maker.

Reconciles a CSV roster of students and projects against the OS group
database and the filesystem, then writes a static index.html listing.
"""
