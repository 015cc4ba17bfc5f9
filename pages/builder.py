"""Builder page -- compose a Components V2 tree, send it, copy its JSON."""

import atexit
import json

import dash
import requests
from dash import dcc, html, callback, ctx, Input, Output, State, no_update
import dash_mantine_components as dmc

from dash_builders import (
    PersistenceScheduler,
    Settings,
    SendState,
    Outcome,
    UrlStore,
    WebhookError,
    apply_classification,
    begin_send,
    cancel_title,
    get_errors,
    get_thread_id,
    add_uploads,
    attachments_from_store,
    send_message,
    serialize_state,
)
from dash_builders._constants import DEFAULT_COMPONENTS, SUCCESS_MARKER, get_builder_store_ids

dash.register_page(__name__, path="/", title="dash-builders", name="Builder")

SETTINGS = Settings.from_env()
STORE_IDS = get_builder_store_ids()

# Read once at startup; written back through the debounced scheduler
url_store = UrlStore(SETTINGS.store_path)
url_scheduler = PersistenceScheduler(url_store.set, delay=SETTINGS.debounce)
atexit.register(url_scheduler.close)

WEBHOOK_URL_INITIAL = url_store.get() or SETTINGS.webhook_url
DEFAULT_JSON = json.dumps(DEFAULT_COMPONENTS, indent=2)

DC_ERROR = "#dd9898"
DC_SUCCESS = "#98dd9f"

OUTCOME_BADGES = {
    Outcome.SUCCESS: ("Sent", "green"),
    Outcome.NEEDS_TITLE: ("Post title required", "yellow"),
    Outcome.ERROR: ("Discord rejected the message", "red"),
}

layout = dmc.Container(
    [
        dcc.Store(id=STORE_IDS["components"], data=DEFAULT_COMPONENTS),
        dcc.Store(id=STORE_IDS["send_state"], data=SendState().to_dict()),
        dcc.Store(id=STORE_IDS["attachments"], data=[]),
        dmc.Space(h="xl"),
        dmc.Title("Message Builder", order=2, mb="md"),
        dmc.Alert(
            [
                dmc.Text(
                    "Compose a Components V2 message as JSON, paste a webhook URL "
                    "and press Send.  The JSON below the editor can be copied into "
                    "your own code.",
                    size="sm",
                    mb="xs",
                ),
                dmc.Button("Clear everything", id="wb-clear-btn", size="xs", variant="light"),
            ],
            id="wb-welcome",
            title="Welcome",
            color="indigo",
            variant="light",
            mb="md",
        ),
        dmc.Grid(
            [
                # Left: composer ------------------------------------------
                dmc.GridCol(
                    dmc.Paper(
                        [
                            dmc.TextInput(
                                id="wb-webhook-url",
                                label="Webhook URL",
                                placeholder="https://discord.com/api/webhooks/...",
                                value=WEBHOOK_URL_INITIAL,
                                mb="xs",
                            ),
                            html.Div(id="wb-thread-badge", style={"marginBottom": "0.5rem"}),
                            dmc.JsonInput(
                                id="wb-components-json",
                                label="Components",
                                value=DEFAULT_JSON,
                                formatOnBlur=True,
                                autosize=True,
                                minRows=12,
                                maxRows=30,
                                mb="xs",
                            ),
                            html.Div(id="wb-json-error"),
                            dcc.Upload(
                                dmc.Button("Add attachments", variant="outline", size="xs"),
                                id="wb-upload",
                                multiple=True,
                            ),
                            dmc.Text(
                                "Reference uploads as attachment://<filename>.",
                                size="xs",
                                c="dimmed",
                                mt=4,
                            ),
                            html.Div(id="wb-attachment-list", style={"margin": "0.5rem 0"}),
                            dmc.Group(
                                [
                                    dmc.Button("Send", id="wb-send-btn", color="green"),
                                    dmc.Button(
                                        "Clear attachments",
                                        id="wb-clear-files-btn",
                                        variant="subtle",
                                        color="gray",
                                    ),
                                    html.Div(id="wb-send-badge"),
                                ]
                            ),
                        ],
                        p="lg",
                        withBorder=True,
                    ),
                    span={"base": 12, "md": 6},
                ),
                # Right: response + codegen --------------------------------
                dmc.GridCol(
                    dmc.Paper(
                        [
                            html.Div(id="wb-response", style={"display": "block"}),
                            dmc.Title("Code", order=4, mb="xs"),
                            dmc.Code(id="wb-codegen", block=True),
                        ],
                        p="lg",
                        withBorder=True,
                    ),
                    span={"base": 12, "md": 6},
                ),
            ],
        ),
        # Forum channels need a thread name -------------------------------
        dmc.Modal(
            [
                dmc.TextInput(
                    id="wb-post-title",
                    label="Post title",
                    placeholder="Name of the new forum post",
                    mb="md",
                ),
                dmc.Group(
                    [
                        dmc.Button("Cancel", id="wb-title-cancel-btn", variant="subtle", color="gray"),
                        dmc.Button("Send", id="wb-title-send-btn", color="green"),
                    ],
                    justify="flex-end",
                ),
            ],
            id="wb-title-modal",
            title="This webhook posts into a forum channel",
            opened=False,
        ),
        dmc.Space(h="xl"),
    ],
    size="xl",
    py="xl",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error_badge(text):
    return dmc.Badge(text[:80], color="red")


def _dispatch(components, webhook_url, send_state, files, *, post_title=None):
    """Run one send attempt; returns (send_state dict, modal opened, badge)."""
    state = begin_send(SendState.from_dict(send_state))
    try:
        result = send_message(
            components,
            webhook_url,
            post_title=post_title,
            attachments=attachments_from_store(files),
            can_prompt_title=post_title is None,
            timeout=SETTINGS.timeout,
        )
    except WebhookError as exc:
        return cancel_title(state).to_dict(), False, _error_badge(str(exc))
    except requests.RequestException as exc:
        print(f"[dash-builders] Webhook request failed: {exc}")
        return cancel_title(state).to_dict(), False, _error_badge(f"Request failed: {exc}")
    except ValueError as exc:
        # Non-JSON error body (proxy error page, etc.)
        return cancel_title(state).to_dict(), False, _error_badge(f"Unexpected response: {exc}")

    state = apply_classification(state, result)
    label, color = OUTCOME_BADGES[result.outcome]
    badge = dmc.Badge(label, color=color)
    return state.to_dict(), state.awaiting_title, badge


# ---------------------------------------------------------------------------
# CB1: Webhook URL -> debounced persistence + thread badge
# ---------------------------------------------------------------------------

@callback(
    Output("wb-thread-badge", "children"),
    Input("wb-webhook-url", "value"),
)
def on_webhook_url(webhook_url):
    url_scheduler.schedule(webhook_url or "")
    thread_id = get_thread_id(webhook_url)
    if thread_id:
        return dmc.Badge(f"Thread {thread_id}", color="violet", variant="light")
    return None


# ---------------------------------------------------------------------------
# CB2: JSON editor -> component tree
# ---------------------------------------------------------------------------

@callback(
    Output(STORE_IDS["components"], "data"),
    Output("wb-json-error", "children"),
    Input("wb-components-json", "value"),
    prevent_initial_call=True,
)
def on_components_json(value):
    try:
        components = json.loads(value or "[]")
    except ValueError as exc:
        return no_update, dmc.Text(f"Invalid JSON: {exc}", c="red", size="xs")
    if not isinstance(components, list):
        return no_update, dmc.Text("Top level must be a list of components", c="red", size="xs")
    return components, None


@callback(
    Output("wb-components-json", "value"),
    Output("wb-welcome", "style"),
    Input("wb-clear-btn", "n_clicks"),
    prevent_initial_call=True,
)
def clear_everything(_n):
    return "[]", {"display": "none"}


# ---------------------------------------------------------------------------
# CB3: Codegen
# ---------------------------------------------------------------------------

@callback(
    Output("wb-codegen", "children"),
    Input(STORE_IDS["components"], "data"),
)
def render_codegen(components):
    return serialize_state(components if components is not None else [])


# ---------------------------------------------------------------------------
# CB4: Attachments
# ---------------------------------------------------------------------------

@callback(
    Output(STORE_IDS["attachments"], "data"),
    Output("wb-attachment-list", "children"),
    Input("wb-upload", "contents"),
    Input("wb-clear-files-btn", "n_clicks"),
    State("wb-upload", "filename"),
    State(STORE_IDS["attachments"], "data"),
    prevent_initial_call=True,
)
def on_attachments(contents, _clear, filenames, files):
    if ctx.triggered_id == "wb-clear-files-btn":
        files = []
    else:
        files = add_uploads(files, contents, filenames)

    badges = [
        dmc.Badge(
            f"attachment://{a.filename} ({a.size:,} bytes)",
            color="gray",
            variant="outline",
            mr=4,
        )
        for a in attachments_from_store(files).values()
    ]
    return files, badges


# ---------------------------------------------------------------------------
# CB5: Send, then the forum-title retry
# ---------------------------------------------------------------------------

@callback(
    Output(STORE_IDS["send_state"], "data"),
    Output("wb-title-modal", "opened"),
    Output("wb-send-badge", "children"),
    Input("wb-send-btn", "n_clicks"),
    State(STORE_IDS["components"], "data"),
    State("wb-webhook-url", "value"),
    State(STORE_IDS["send_state"], "data"),
    State(STORE_IDS["attachments"], "data"),
    running=[
        (Output("wb-send-btn", "loading"), True, False),
        (Output("wb-response", "style"), {"display": "none"}, {"display": "block"}),
    ],
    prevent_initial_call=True,
)
def send(_n, components, webhook_url, send_state, files):
    return _dispatch(components, webhook_url, send_state, files)


@callback(
    Output(STORE_IDS["send_state"], "data", allow_duplicate=True),
    Output("wb-title-modal", "opened", allow_duplicate=True),
    Output("wb-send-badge", "children", allow_duplicate=True),
    Input("wb-title-send-btn", "n_clicks"),
    State("wb-post-title", "value"),
    State(STORE_IDS["components"], "data"),
    State("wb-webhook-url", "value"),
    State(STORE_IDS["send_state"], "data"),
    State(STORE_IDS["attachments"], "data"),
    running=[
        (Output("wb-title-send-btn", "loading"), True, False),
        (Output("wb-response", "style"), {"display": "none"}, {"display": "block"}),
    ],
    prevent_initial_call=True,
)
def send_with_title(_n, post_title, components, webhook_url, send_state, files):
    if not post_title:
        return no_update, no_update, no_update
    return _dispatch(components, webhook_url, send_state, files, post_title=post_title)


@callback(
    Output(STORE_IDS["send_state"], "data", allow_duplicate=True),
    Output("wb-title-modal", "opened", allow_duplicate=True),
    Input("wb-title-cancel-btn", "n_clicks"),
    Input("wb-title-modal", "opened"),
    State(STORE_IDS["send_state"], "data"),
    prevent_initial_call=True,
)
def dismiss_title(_n, opened, send_state):
    state = SendState.from_dict(send_state)
    if ctx.triggered_id == "wb-title-modal" and opened:
        return no_update, no_update
    if not state.awaiting_title:
        return no_update, False
    return cancel_title(state).to_dict(), False


# ---------------------------------------------------------------------------
# CB6: Response panel
# ---------------------------------------------------------------------------

@callback(
    Output("wb-response", "children"),
    Input(STORE_IDS["send_state"], "data"),
)
def render_response(send_state):
    response = SendState.from_dict(send_state).response
    if not response:
        return None

    children = [
        html.Pre(
            json.dumps(response, indent=4),
            style={"color": DC_SUCCESS if response == SUCCESS_MARKER else DC_ERROR,
                   "whiteSpace": "pre-wrap", "marginBottom": "1rem"},
        )
    ]
    errors = get_errors(response)
    if errors:
        children.append(
            dmc.List(
                [dmc.ListItem(f"{path}: {'; '.join(map(str, msgs))}") for path, msgs in errors.items()],
                size="sm",
                mb="md",
            )
        )
    return children
