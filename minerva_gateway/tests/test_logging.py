from minerva_gateway.middlewares.logging import redact


def test_redact_nested():
    body = {"username": "u", "password": "p", "data": [{"token": "t", "ok": 1}]}
    assert redact(body) == {"username": "u", "password": "***", "data": [{"token": "***", "ok": 1}]}
