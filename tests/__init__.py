"""
Test suite for bondflow

Contains:
- tests/unit/          : Unit tests for services, domain models, ingress and wiring
"""
