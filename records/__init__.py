"""Records application for the Hospital JMV backend.

This package contains the models, serializers, services, views and route
registrations behind the administrative and clinical dashboards.
"""
