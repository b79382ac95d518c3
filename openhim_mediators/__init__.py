"""OpenHIM mediator registration and FHIR helpers"""
