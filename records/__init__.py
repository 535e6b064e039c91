"""Records application for the clinic backend.

This package contains the user and patient models, the JSON API
served to the front-end, the outbound API client and the database
seeding commands.
"""
