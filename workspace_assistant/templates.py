"""Fixed file bodies written into a generated Django workspace."""

from __future__ import annotations

STATIC_SETTINGS_HEADER = "# Static files added by workspace-assistant\n"

STATIC_SETTINGS = """STATICFILES_DIRS = [BASE_DIR / 'static']
STATIC_ROOT = BASE_DIR / 'staticfiles'
"""

URLS_ANCHOR = "urlpatterns = ["


def app_template_files(project_name: str, app_name: str) -> dict[str, str]:
    """Return ``{relative path: body}`` for the files of a new app."""
    index_html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{project_name} | {app_name}</title>
</head>
<body>
  <h1>Welcome to {app_name}</h1>
  <p>This page is served by the <code>{app_name}</code> app of <code>{project_name}</code>.</p>
</body>
</html>
"""
    views_py = f"""from django.shortcuts import render


def index(request):
    return render(request, '{app_name}/index.html')
"""
    urls_py = f"""from django.urls import path

from . import views

app_name = '{app_name}'

urlpatterns = [
    path('', views.index, name='index'),
]
"""
    return {f"{app_name}/templates/{app_name}/index.html": index_html, f"{app_name}/views.py": views_py,
            f"{app_name}/urls.py": urls_py, }


def url_route(prefix: str, app_name: str) -> str:
    """Return the ``urlpatterns`` entry that includes the app's URLconf."""
    return f"    path('{prefix}', include('{app_name}.urls')),"
