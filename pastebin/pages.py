"""
HTML pages for the human-facing routes.
"""
import html

_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
            max-width: 900px;
            margin: 40px auto;
            padding: 0 20px;
            color: #333;
        }
        pre {
            background: #f5f5f5;
            border: 1px solid #ddd;
            border-radius: 5px;
            padding: 20px;
            white-space: pre-wrap;
            word-wrap: break-word;
        }
        .paste-id {
            color: #666;
            font-size: 12px;
            font-family: monospace;
        }
        a {
            color: #667eea;
        }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - Pastebin Lite</title>
    <style>{_STYLE}    </style>
</head>
<body>
{body}
</body>
</html>"""


def escape_paste_content(content: str) -> str:
    """Neutralise markup in paste content. Only "<" is escaped."""
    return content.replace("<", "&lt;")


def render_paste_page(paste_id: str, content: str) -> str:
    """Render a paste inside a pre-formatted block."""
    return _page(
        "Paste",
        f"""    <div class="paste-id">ID: {html.escape(paste_id)}</div>
    <pre>{escape_paste_content(content)}</pre>
    <p><a href="/">Create a new paste</a></p>""",
    )


def render_not_found_page() -> str:
    """Render a 404 error page."""
    return _page(
        "Not Found",
        """    <h1>404</h1>
    <p>This paste was not found, has expired, or its view limit has been exceeded.</p>
    <p><a href="/">Create a new paste</a></p>""",
    )


def render_create_form() -> str:
    """Render the form used to create a paste from a browser."""
    return _page(
        "New Paste",
        """    <h1>Pastebin Lite</h1>
    <form method="post" action="/create">
        <p><textarea name="content" rows="15" cols="80" required></textarea></p>
        <p>
            <label>Expires after (seconds) <input type="number" name="ttl_seconds" min="1"></label>
            <label>Max views <input type="number" name="max_views" min="1"></label>
        </p>
        <p><button type="submit">Create paste</button></p>
    </form>""",
    )


def render_created_page(url: str) -> str:
    """Render the confirmation page shown after a form submission."""
    safe_url = html.escape(url)
    return _page(
        "Created",
        f"""    <p>Created:</p>
    <p><a href="{safe_url}">{safe_url}</a></p>""",
    )


def render_invalid_page(code: str) -> str:
    """Render the page shown when a form submission fails validation."""
    return _page(
        "Invalid Paste",
        f"""    <h1>Could not create paste</h1>
    <p>{html.escape(code)}</p>
    <p><a href="/">Try again</a></p>""",
    )


def render_unavailable_page() -> str:
    """Render a 503 page for when the storage engine can't be reached."""
    return _page(
        "Unavailable",
        """    <h1>503</h1>
    <p>Pastes are temporarily unavailable. Please try again shortly.</p>""",
    )
