# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the mailcompat test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

from mailcompat.core.models import CodeFix, EngineWarning, Severity
from mailcompat.remedies.resolver import RemedyCatalog


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "mailcompat"


@pytest.fixture
def sample_html_email():
    """A newsletter using most of the features mail clients disagree on."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <link rel="stylesheet" href="https://example.com/mail.css">
        <style>
            @font-face { font-family: Brand; src: url('brand.woff2'); }
            body { font-family: Brand, Arial, sans-serif; }
            .header { background: #4a90d9; color: white; padding: 20px; }
            .button { border-radius: 6px; box-shadow: 0 1px 2px #000; }
            .button:hover { opacity: 0.8; }
            @media (max-width: 600px) {
                .content { padding: 10px; }
            }
        </style>
    </head>
    <body>
        <div class="header" style="display: flex; gap: 8px;">
            <h1>Welcome to Our Newsletter!</h1>
            <svg width="10" height="10"><circle cx="5" cy="5" r="4"/></svg>
        </div>
        <div class="content" style="position: relative; max-width: 600px;">
            <p>Hello <strong>User</strong>,</p>
            <a class="button" href="https://example.com">Click here</a>
            <img src="https://example.com/logo.png" alt="Company Logo" width="200">
            <form action="https://example.com/subscribe">
                <input type="email" name="email">
                <button type="submit">Subscribe</button>
            </form>
            <video src="https://example.com/intro.mp4"></video>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def table_html_email():
    """A conservative table-based email with inline styles only."""
    return """
    <html>
    <body>
        <table role="presentation" width="100%" style="border-collapse: collapse;">
            <tr>
                <td style="padding: 20px; color: #333333; font-size: 16px;">
                    Plain, table-based content.
                </td>
            </tr>
        </table>
    </body>
    </html>
    """


@pytest.fixture
def positioned_email():
    """One element with an inline position declaration."""
    return '<html><body><div id="badge" style="position:absolute; color: red">New</div></body></html>'


@pytest.fixture
def grid_stylesheet_email():
    """Only feature: display:grid inside a <style> block."""
    return """
    <html>
    <head><style>.layout { display: grid; }</style></head>
    <body><div class="layout">cells</div></body>
    </html>
    """


@pytest.fixture
def tiered_catalog():
    """A remediation catalog with an entry at every tier for "gap"."""
    def fix(name):
        return CodeFix(before=f"{name} before", after=f"{name} after",
                       language="html", description=name)

    return RemedyCatalog(
        suggestions={
            "gap::outlook::jsx": "tier1",
            "gap::jsx": "tier2",
            "gap::outlook": "tier3",
            "gap": "tier4",
            "float::outlook": "float tier3",
        },
        fixes={
            "gap::outlook::jsx": fix("tier1"),
            "gap": fix("tier4"),
            "float::jsx": fix("float tier2"),
        },
    )


@pytest.fixture
def make_warning():
    """Factory for EngineWarning records."""
    def _make(engine_id="gmail-web", feature="position", severity=Severity.WARNING):
        return EngineWarning(
            severity=severity,
            engine_id=engine_id,
            feature=feature,
            message=f"{engine_id}: {feature}",
        )
    return _make
