"""
Grand Auto Garage: customer, vehicle and service record keeping over a REST API.
"""
__version__ = "1.0.0"
