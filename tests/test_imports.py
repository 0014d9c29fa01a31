"""
Smoke tests to verify all modules can be imported.
"""

def test_import_recordstore():
    import recordstore
    assert hasattr(recordstore, '__version__')


def test_public_api():
    import recordstore
    for name in recordstore.__all__:
        assert hasattr(recordstore, name)


def test_import_cli():
    from recordstore import cli
    assert hasattr(cli, 'app')
