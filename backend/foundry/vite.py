"""
Foundry — Vite Frontend Integration
====================================

What:  Produces the <script>/<link> tags that load the React frontend.
How:   Two modes, selected by VITE_DEV_MODE:

    Dev mode (Vite dev server running on VITE_HOST:VITE_PORT):
        <script type="module" src="http://localhost:5173/static/@vite/client"></script>
        <script type="module" src="http://localhost:5173/static/resources/main.tsx"></script>
        (+ the @vitejs/plugin-react refresh preamble when VITE_REACT and hot reload)

    Production (after `vite build` with build.manifest enabled):
        Reads {VITE_BUNDLE_DIR}/{VITE_MANIFEST_NAME} and emits, for the entry:
        stylesheets (entry + statically imported chunks), modulepreload links
        for imported chunks, then the entry script, all under VITE_ASSET_URL.

Who:   routes/frontend.py renders templates/index.html with these tags.

The backend never bundles anything itself; it only reads what Vite wrote.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from markupsafe import Markup

from foundry.config import Settings, settings as app_settings
from foundry.exceptions import FrontendAssetError

logger = logging.getLogger(__name__)

REACT_REFRESH_PREAMBLE = """<script type="module">
import RefreshRuntime from '{base}@react-refresh'
RefreshRuntime.injectIntoGlobalHook(window)
window.$RefreshReg$ = () => {{}}
window.$RefreshSig$ = () => (type) => type
window.__vite_plugin_react_preamble_installed__ = true
</script>"""


class ViteAssetLoader:
    """
    Builds asset tags for one Vite entry point.

    The manifest is read once and cached for the life of the loader; call
    reset() after rebuilding the frontend without restarting the server.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or app_settings
        self._manifest: Optional[Dict[str, Any]] = None

    # ── Paths & URLs ──────────────────────────────────────────────────────

    @property
    def manifest_path(self) -> Path:
        return Path(self.config.vite_bundle_dir) / self.config.vite_manifest_name

    @property
    def dev_server_url(self) -> str:
        c = self.config
        return f"{c.vite_protocol}://{c.vite_host}:{c.vite_port}{c.vite_asset_url}"

    def asset_url(self, path: str) -> str:
        return f"{self.config.vite_asset_url}{path.lstrip('/')}"

    # ── Manifest ──────────────────────────────────────────────────────────

    def reset(self) -> None:
        self._manifest = None

    def load_manifest(self) -> Dict[str, Any]:
        """
        Parse the Vite manifest.

        Raises:
            FrontendAssetError: manifest missing or not valid JSON.
        """
        if self._manifest is not None:
            return self._manifest
        path = self.manifest_path
        try:
            self._manifest = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise FrontendAssetError(
                message="Frontend assets have not been built. Run `npm run build` or enable VITE_DEV_MODE.",
                context={"manifest": str(path)},
            )
        except (OSError, json.JSONDecodeError) as e:
            raise FrontendAssetError(
                message="The Vite manifest could not be read",
                context={"manifest": str(path), "error_type": type(e).__name__},
            )
        logger.info("Loaded Vite manifest with %d entries from %s", len(self._manifest), path)
        return self._manifest

    # ── Tags ──────────────────────────────────────────────────────────────

    def generate_tags(self, entry: Optional[str] = None) -> Markup:
        entry = entry or self.config.vite_entry_point
        if self.config.vite_dev_mode:
            return Markup("\n".join(self._dev_tags(entry)))
        return Markup("\n".join(self._production_tags(entry)))

    def _dev_tags(self, entry: str) -> List[str]:
        base = self.dev_server_url
        tags = []
        if self.config.vite_react and self.config.vite_hot_reload:
            tags.append(REACT_REFRESH_PREAMBLE.format(base=base))
        tags.append(f'<script type="module" src="{base}@vite/client"></script>')
        tags.append(f'<script type="module" src="{base}{entry.lstrip("/")}"></script>')
        return tags

    def _production_tags(self, entry: str) -> List[str]:
        manifest = self.load_manifest()
        chunk = manifest.get(entry)
        if chunk is None:
            raise FrontendAssetError(
                message=f"Entry point '{entry}' is not in the Vite manifest",
                context={"entry": entry, "manifest": str(self.manifest_path)},
            )

        imported = self._collect_imports(manifest, entry)
        stylesheets: List[str] = []
        for css in chunk.get("css", []):
            stylesheets.append(css)
        for key in imported:
            for css in manifest[key].get("css", []):
                if css not in stylesheets:
                    stylesheets.append(css)

        tags = [f'<link rel="stylesheet" href="{self.asset_url(css)}" />' for css in stylesheets]
        tags.extend(
            f'<link rel="modulepreload" href="{self.asset_url(manifest[key]["file"])}" />'
            for key in imported
        )
        tags.append(f'<script type="module" src="{self.asset_url(chunk["file"])}"></script>')
        return tags

    @staticmethod
    def _collect_imports(manifest: Dict[str, Any], entry: str) -> List[str]:
        """Static imports of `entry`, depth-first, each chunk once, entry excluded."""
        ordered: List[str] = []
        seen: Set[str] = {entry}
        stack = list(reversed(manifest[entry].get("imports", [])))
        while stack:
            key = stack.pop()
            if key in seen or key not in manifest:
                continue
            seen.add(key)
            ordered.append(key)
            stack.extend(reversed(manifest[key].get("imports", [])))
        return ordered


vite_loader = ViteAssetLoader()
