"""
buildpub Test Suite
===================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/           → buildpub.core (config, models, exceptions)
    ├── test_infrastructure/ → buildpub.infrastructure (checksums, store, copy)
    ├── test_integrations/   → buildpub.integrations (repository clients)
    ├── test_orchestration/  → buildpub.orchestration (filter, reconcile, merge, run)
    ├── test_integration/    → End-to-end pipeline tests
    ├── factories.py         → Build record / candidate builders
    └── conftest.py          → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_orchestration # Run only orchestration tests
    pytest -m integration           # Run only end-to-end tests
"""
