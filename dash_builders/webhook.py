"""Send Components V2 messages to Discord via the Webhook Execute API."""

from __future__ import annotations

import requests

from ._constants import DEFAULT_TIMEOUT, SUCCESS_STATUS
from .request import prepare_request
from .response import classify_response
from .target import resolve_target


class WebhookError(ValueError):
    """Base class for errors raised before a request reaches Discord."""


class InvalidWebhookURLError(WebhookError):
    def __init__(self, webhook_url):
        self.webhook_url = webhook_url
        super().__init__("Webhook URL is missing or malformed")


def execute_request(url, request, *, session=None, timeout=DEFAULT_TIMEOUT):
    """Dispatch a :class:`~dash_builders.request.WebhookRequest`.

    Returns
    -------
    tuple[int, Any]
        HTTP status and parsed JSON body (``None`` for ``204``).

    Raises
    ------
    requests.RequestException
        The request never completed.
    ValueError
        A non-204 response whose body is not JSON.
    """
    http = session or requests
    resp = http.request(request.method, url, timeout=timeout, **request.to_requests_kwargs())
    print(f"[dash-builders] Webhook response: {resp.status_code}")
    if resp.status_code == SUCCESS_STATUS:
        return resp.status_code, None
    return resp.status_code, resp.json()


def send_message(
    components,
    webhook_url,
    *,
    post_title=None,
    attachments=None,
    can_prompt_title=True,
    session=None,
    timeout=DEFAULT_TIMEOUT,
):
    """POST *components* to the webhook and classify the response.

    Parameters
    ----------
    components : list[dict]
        Top-level Components V2 tree.
    webhook_url : str
        Raw webhook URL as typed by the user.  Resolved on every call.
    post_title : str, optional
        Forum thread name for the titled retry.
    attachments : Mapping[str, Attachment], optional
        Uploaded files referenced as ``attachment://<name>``.
    can_prompt_title : bool
        Whether a ``220001`` response may open the title prompt.  Pass
        ``False`` for the titled retry.
    session : requests.Session, optional
        Session to send with.  Defaults to the ``requests`` module.
    timeout : float
        Request timeout in seconds.

    Returns
    -------
    Classification

    Raises
    ------
    InvalidWebhookURLError
        *webhook_url* cannot be parsed.
    requests.RequestException
        Network failure; not classified here.
    """
    target = resolve_target(webhook_url)
    if not target:
        raise InvalidWebhookURLError(webhook_url)

    request = prepare_request(components, post_title, attachments=attachments)
    status_code, body = execute_request(target.url, request, session=session, timeout=timeout)
    return classify_response(status_code, body, can_prompt_title=can_prompt_title)
