"""Classification of failed HTTP exchanges.

Every operation of the client funnels transport failures through
:func:`classify` so that callers see a single taxonomy.  Rules are applied
in order; the first match wins:

+-----------------------------------------+-----------------------------+
| Condition                               | Kind                        |
+=========================================+=============================+
| No response (DNS, refused, timeout, …)  | ``UNKNOWN_ERROR``           |
+-----------------------------------------+-----------------------------+
| Code ≥ 500                              | ``SERVER_ERROR``            |
+-----------------------------------------+-----------------------------+
| 401 with message ``"Invalid login"``    | ``INVALID_CREDENTIALS``     |
+-----------------------------------------+-----------------------------+
| Any other 401                           | ``JWT_EXPIRED``             |
+-----------------------------------------+-----------------------------+
| Anything else                           | ``UNKNOWN_ERROR``           |
+-----------------------------------------+-----------------------------+

The code is read from the server's error envelope (``{code, message}``)
and falls back to the HTTP status when the body is not an envelope.
"""

import requests

from featherclient.core.exceptions import ErrorKind, FeatherError

INVALID_LOGIN_MESSAGE = "Invalid login"


def error_envelope(response: requests.Response) -> dict:
    """Return the decoded error envelope of *response*.

    Non-JSON or non-object bodies are wrapped as
    ``{"code": <status>, "message": <text>}`` so that callers always get
    the same shape.
    """
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        envelope = dict(data)
        envelope.setdefault("code", response.status_code)
        return envelope
    return {"code": response.status_code, "message": response.text}


def envelope_code(envelope: dict, response: requests.Response) -> int:
    code = envelope.get("code")
    if isinstance(code, int):
        return code
    return response.status_code


def classify(exc: requests.RequestException) -> FeatherError:
    """Convert a transport exception into a :class:`FeatherError`.

    This function never raises.

    Args:
        exc: The exception raised by the pipeline, typically a
            :class:`requests.HTTPError` carrying the failed response, or a
            connection-level error without one.

    Returns:
        A :class:`FeatherError` whose ``kind`` follows the rule table of
        this module.
    """
    response = getattr(exc, "response", None)
    if response is None:
        return FeatherError(ErrorKind.UNKNOWN_ERROR, str(exc))

    envelope = error_envelope(response)
    code = envelope_code(envelope, response)

    if code >= 500:
        return FeatherError(ErrorKind.SERVER_ERROR, envelope)
    if code == 401:
        if envelope.get("message") == INVALID_LOGIN_MESSAGE:
            return FeatherError(ErrorKind.INVALID_CREDENTIALS, envelope)
        return FeatherError(ErrorKind.JWT_EXPIRED, envelope)
    return FeatherError(ErrorKind.UNKNOWN_ERROR, envelope)
