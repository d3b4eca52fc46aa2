"""
Panel View - builds the overlay HTML fragment.

Module-provided fragments (settings, content) are inserted as-is; every value
coming from configuration or the request is escaped.
"""

from dataclasses import dataclass, field
from html import escape
from typing import Optional, Sequence

from adminpanel.data_storage import ModuleDataStorageCollection
from adminpanel.interface import (
    IContentProvider,
    IMainModule,
    IModuleSettingsProvider,
    IPageSettingsProvider,
    IPanelModule,
    IShortInfoProvider,
    ISubmoduleProvider,
)


@dataclass
class PanelViewModel:
    """Everything the overlay template needs for one request."""

    toggle_url: str
    resources: dict[str, str]
    open: bool = False
    language_key: Optional[str] = None
    modules: Sequence[IPanelModule] = field(default_factory=list)
    settings_modules: Sequence[IPanelModule] = field(default_factory=list)
    parent_modules: Sequence[IPanelModule] = field(default_factory=list)
    module_resources: dict[str, str] = field(default_factory=lambda: {"js": "", "css": ""})
    save_url: str = ""
    request_id: str = ""
    data: ModuleDataStorageCollection = field(default_factory=ModuleDataStorageCollection)
    backend_url: str = ""


def render_panel(view: PanelViewModel) -> str:
    """Render the overlay markup spliced in front of ``</body>``."""
    parts: list[str] = [view.resources.get("css", "")]
    if view.open:
        parts.append(view.module_resources.get("css", ""))

    lang = f' lang="{escape(view.language_key)}"' if view.language_key else ""
    parts.append(
        f'<div id="TSFE_ADMIN_PANEL_FORM" class="typo3-adminPanel" data-typo3-role="typo3-adminPanel"'
        f' data-request-id="{escape(view.request_id)}"{lang}>'
    )
    parts.append(_render_bar(view))
    if view.open:
        parts.append(_render_settings_form(view))
        parts.extend(_render_module(module, view) for module in _shown_modules(view.modules))
    parts.append("</div>")

    parts.append(view.resources.get("js", ""))
    if view.open:
        parts.append(view.module_resources.get("js", ""))
    return "".join(parts)


def _render_bar(view: PanelViewModel) -> str:
    expanded = "true" if view.open else "false"
    html = [
        '<div class="typo3-adminPanel-bar">',
        f'<button type="button" class="typo3-adminPanel-toggle" data-typo3-role="adminPanel-toggle"'
        f' data-url="{escape(view.toggle_url)}" aria-expanded="{expanded}">Admin Panel</button>',
    ]
    if view.open:
        html.append('<ul class="typo3-adminPanel-module-list">')
        for module in _shown_modules(view.modules):
            html.append(
                f'<li class="typo3-adminPanel-module-trigger" data-module="{escape(module.get_identifier())}"'
                f' data-icon="{escape(module.get_icon_identifier())}">'
                f'<span class="typo3-adminPanel-module-label">{escape(module.get_label())}</span>'
            )
            if module in view.parent_modules and isinstance(module, IShortInfoProvider):
                short_info = module.get_short_info()
                if short_info:
                    html.append(f'<span class="typo3-adminPanel-short-info">{escape(short_info)}</span>')
            html.append("</li>")
        html.append("</ul>")
        if view.backend_url:
            html.append(
                f'<a class="typo3-adminPanel-backend-link" href="{escape(view.backend_url)}"'
                ' target="_blank" rel="noopener">Edit in backend</a>'
            )
    html.append("</div>")
    return "".join(html)


def _render_settings_form(view: PanelViewModel) -> str:
    html = [
        f'<form class="typo3-adminPanel-settings" data-typo3-role="adminPanel-form" method="post"'
        f' action="{escape(view.save_url)}">'
    ]
    for module in view.settings_modules:
        if isinstance(module, IPageSettingsProvider):
            html.append(
                f'<fieldset data-module="{escape(module.get_identifier())}">'
                f'<legend>{escape(module.get_label())}</legend>{module.get_page_settings()}</fieldset>'
            )
    html.append('<button type="submit" class="typo3-adminPanel-save">Save</button></form>')
    return "".join(html)


def _shown_modules(modules: Sequence[IPanelModule]) -> list[IPanelModule]:
    return [module for module in modules if not isinstance(module, IMainModule) or module.is_shown()]


def _render_module(module: IPanelModule, view: PanelViewModel) -> str:
    data = view.data
    identifier = escape(module.get_identifier())
    html = [f'<section class="typo3-adminPanel-module" data-module="{identifier}">']
    html.append(f"<h2>{escape(module.get_label())}</h2>")
    if isinstance(module, IModuleSettingsProvider):
        settings = f'<div class="typo3-adminPanel-module-settings">{module.get_settings()}</div>'
        if isinstance(module, IMainModule) and module.show_form_submit_button():
            settings = (
                f'<form data-typo3-role="adminPanel-form" method="post" action="{escape(view.save_url)}">'
                f'{settings}<button type="submit" class="typo3-adminPanel-save">Save</button></form>'
            )
        html.append(settings)
    if isinstance(module, IContentProvider):
        html.append(f'<div class="typo3-adminPanel-content">{module.get_content(data.get_module_data(module))}</div>')
    if isinstance(module, ISubmoduleProvider):
        for sub_module in module.get_sub_modules():
            html.append(_render_sub_module(sub_module, data))
    html.append("</section>")
    return "".join(html)


def _render_sub_module(module: IPanelModule, data: ModuleDataStorageCollection) -> str:
    html = [
        f'<div class="typo3-adminPanel-submodule" data-submodule="{escape(module.get_identifier())}">',
        f"<h3>{escape(module.get_label())}</h3>",
    ]
    if isinstance(module, IModuleSettingsProvider):
        html.append(f'<div class="typo3-adminPanel-module-settings">{module.get_settings()}</div>')
    if isinstance(module, IContentProvider):
        html.append(f'<div class="typo3-adminPanel-content">{module.get_content(data.get_module_data(module))}</div>')
    html.append("</div>")
    return "".join(html)
