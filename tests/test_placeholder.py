"""Placeholder test verifying package import."""


def test_import() -> None:
    """Verify top-level package is importable."""
    import http_payload

    assert http_payload.__version__ is not None
    assert http_payload.__version__ == "0.1.0"
