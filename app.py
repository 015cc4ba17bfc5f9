"""dash-builders application.

Compose a Discord Components V2 message, send it to a webhook, and copy
the JSON representation of the component tree.
"""

from dotenv import load_dotenv

load_dotenv()

import dash
from dash import html
import dash_mantine_components as dmc

from dash_builders import Settings

SETTINGS = Settings.from_env()

app = dash.Dash(
    __name__,
    use_pages=True,
    suppress_callback_exceptions=True,
    external_stylesheets=dmc.styles.ALL,
)

app.layout = dmc.MantineProvider(
    dmc.AppShell(
        [
            dmc.AppShellHeader(
                dmc.Group(
                    [
                        dmc.Text("dash-builders", fw=700, size="lg"),
                        dmc.Anchor(
                            "Components reference",
                            href="https://discord.com/developers/docs/components/reference",
                            target="_blank",
                            underline="never",
                            c="dimmed",
                            fw=500,
                            size="sm",
                        ),
                    ],
                    justify="space-between",
                    px="md",
                    h="100%",
                ),
            ),
            dmc.AppShellMain(
                html.Div(dash.page_container),
            ),
        ],
        header={"height": 56},
        padding="md",
    ),
    forceColorScheme="dark",
)

if __name__ == "__main__":
    app.run(debug=True, port=SETTINGS.port)
