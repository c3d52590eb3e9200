"""Shared fixtures: build output on disk and a fake Management API"""

import json
import re
from itertools import count
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
import respx

from extension_deploy.core import ConfigLoader
from extension_deploy.models import ManagementCredentials, RetryPolicy

BASE_URL = "https://api.cms.test"
API_HOST = "api.cms.test"
ASSET_HOST = "https://assets.cms.test"
ROOT_FOLDER = "cs_root_folder"
EXTENSION_NAME = "color-picker"

JS_LITERAL = "/static/js/main.a1b2.js"
CSS_LITERAL = "/static/css/main.c3d4.css"
REFERENCE_PATTERN = r"/static/(?:js|css)/(main\.[a-z0-9]+\.(?:js|css))"

INDEX_HTML = f"""<!doctype html>
<html>
<head><link href="{CSS_LITERAL}" rel="stylesheet"></head>
<body><div id="root"></div><script src="{JS_LITERAL}"></script></body>
</html>
"""

BUILD_LOG = """Creating an optimized production build...
Compiled successfully.

File sizes after gzip:

  41.2 kB  build/static/js/main.a1b2.js
  1.1 kB   build/static/css/main.c3d4.css
"""

_FILENAME_RE = re.compile(rb'name="asset\[upload\]"; filename="([^"]+)"')
_PARENT_RE = re.compile(rb'name="asset\[parent_uid\]"\r\n\r\n([^\r]*)\r\n')


class FakeManagementAPI:
    """In-memory stand-in for the assets and extensions endpoints

    ``script(route, *outcomes)`` queues outcomes returned before the real
    handler runs: an int is an error status, an ``httpx.Response`` is
    returned as-is and an exception is raised.
    """

    def __init__(self):
        self.folders: Dict[str, Dict[str, Any]] = {}
        self.assets: Dict[str, Dict[str, Any]] = {}
        self.extensions: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, httpx.Request]] = []
        self._scripted: Dict[str, List[Any]] = {}
        self._ids = count(1)

    # -- test helpers --------------------------------------------------

    def script(self, route: str, *outcomes: Any) -> None:
        self._scripted.setdefault(route, []).extend(outcomes)

    def calls_to(self, route: str) -> List[httpx.Request]:
        return [request for name, request in self.calls if name == route]

    def add_folder(self, name: str, parent_uid: str = ROOT_FOLDER) -> str:
        uid = f"folder{next(self._ids)}"
        self.folders[uid] = {"uid": uid, "name": name, "parent_uid": parent_uid, "is_dir": True}
        return uid

    def add_asset(self, folder_uid: str, title: str) -> str:
        uid = f"blt{next(self._ids)}"
        self.assets[uid] = {
            "uid": uid,
            "title": title,
            "filename": title,
            "url": f"{ASSET_HOST}/{uid}/{title}",
            "parent_uid": folder_uid,
            "is_dir": False,
        }
        return uid

    def add_extension(self, title: str, kind: str = "field") -> str:
        uid = f"ext{next(self._ids)}"
        self.extensions[uid] = {"uid": uid, "title": title, "type": kind}
        return uid

    def assets_in(self, folder_uid: str) -> List[Dict[str, Any]]:
        return [a for a in self.assets.values() if a["parent_uid"] == folder_uid]

    def folder_named(self, name: str) -> Optional[str]:
        for uid, folder in self.folders.items():
            if folder["name"] == name:
                return uid
        return None

    # -- wiring --------------------------------------------------------

    def install(self, router: respx.Router) -> None:
        router.get(host=API_HOST, path="/v3/assets").mock(
            side_effect=self._wrap("list_assets", self._list_assets))
        router.post(host=API_HOST, path="/v3/assets/folders").mock(
            side_effect=self._wrap("create_folder", self._create_folder))
        router.post(host=API_HOST, path="/v3/assets").mock(
            side_effect=self._wrap("create_asset", self._create_asset))
        router.put(host=API_HOST, path__regex=r"^/v3/assets/(?P<uid>[^/]+)$").mock(
            side_effect=self._wrap("update_asset", self._update_asset))
        router.delete(host=API_HOST, path__regex=r"^/v3/assets/(?P<uid>[^/]+)$").mock(
            side_effect=self._wrap("delete_asset", self._delete_asset))
        router.get(host=API_HOST, path="/v3/extensions").mock(
            side_effect=self._wrap("list_extensions", self._list_extensions))
        router.post(host=API_HOST, path="/v3/extensions").mock(
            side_effect=self._wrap("create_extension", self._create_extension))
        router.put(host=API_HOST, path__regex=r"^/v3/extensions/(?P<uid>[^/]+)$").mock(
            side_effect=self._wrap("update_extension", self._update_extension))

    def _wrap(self, name, handler):
        def side_effect(request, **kwargs):
            self.calls.append((name, request))
            queued = self._scripted.get(name)
            if queued:
                outcome = queued.pop(0)
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, httpx.Response):
                    return outcome
                return httpx.Response(
                    outcome,
                    json={"error_message": f"Scripted failure {outcome}", "error_code": outcome},
                )
            return handler(request, **kwargs)
        return side_effect

    # -- handlers ------------------------------------------------------

    def _list_assets(self, request):
        params = request.url.params
        folder = params.get("folder")
        query = json.loads(params["query"]) if "query" in params else {}

        entries: List[Dict[str, Any]] = []
        if params.get("include_folders") == "true":
            entries.extend(f for f in self.folders.values() if f["parent_uid"] == folder)
        if not query.get("is_dir"):
            entries.extend(self.assets_in(folder))
        if "title" in query:
            entries = [e for e in entries if e.get("title") == query["title"]]

        skip = int(params.get("skip", 0))
        limit = int(params.get("limit", 100))
        return httpx.Response(200, json={"assets": entries[skip:skip + limit], "count": len(entries)})

    def _create_folder(self, request):
        body = json.loads(request.content)["asset"]
        uid = self.add_folder(body["name"], body["parent_uid"])
        return httpx.Response(201, json={"notice": "Folder created successfully.", "asset": self.folders[uid]})

    def _create_asset(self, request):
        content = request.read()
        filename = _FILENAME_RE.search(content).group(1).decode()
        parent_uid = _PARENT_RE.search(content).group(1).decode()
        uid = self.add_asset(parent_uid, filename)
        return httpx.Response(201, json={"notice": "Asset created successfully.", "asset": self.assets[uid]})

    def _update_asset(self, request, uid):
        if uid not in self.assets:
            return httpx.Response(404, json={"error_message": "Asset was not found.", "error_code": 145})
        filename = _FILENAME_RE.search(request.read()).group(1).decode()
        asset = self.assets[uid]
        asset["url"] = f"{ASSET_HOST}/{uid}/v{next(self._ids)}/{filename}"
        return httpx.Response(200, json={"notice": "Asset updated successfully.", "asset": asset})

    def _delete_asset(self, request, uid):
        if self.assets.pop(uid, None) is None:
            return httpx.Response(404, json={"error_message": "Asset was not found.", "error_code": 145})
        return httpx.Response(200, json={"notice": "Asset deleted successfully."})

    def _list_extensions(self, request):
        query = json.loads(request.url.params["query"])
        matches = [
            {"uid": e["uid"], "title": e["title"]}
            for e in self.extensions.values()
            if e["type"] == query["type"] and e["title"] == query.get("title", e["title"])
        ]
        return httpx.Response(200, json={"extensions": matches})

    def _create_extension(self, request):
        extension = json.loads(request.content)["extension"]
        uid = f"ext{next(self._ids)}"
        self.extensions[uid] = dict(extension, uid=uid)
        return httpx.Response(201, json={"notice": "Extension created successfully.", "extension": self.extensions[uid]})

    def _update_extension(self, request, uid):
        extension = json.loads(request.content)["extension"]
        self.extensions[uid] = dict(extension, uid=uid)
        return httpx.Response(200, json={"notice": "Extension updated successfully.", "extension": self.extensions[uid]})


@pytest.fixture
def fake_api():
    """Fake Management API installed on the httpx transport"""
    api = FakeManagementAPI()
    with respx.mock(assert_all_called=False) as router:
        api.install(router)
        yield api


@pytest.fixture
def credentials():
    return ManagementCredentials(api_key="blt_api_key", management_token="cs_mgmt_token", base_url=BASE_URL)


@pytest.fixture
def retry_policy():
    """Retries without waiting"""
    return RetryPolicy(attempts=3, initial_delay=0, max_delay=0, timeout=5.0)


@pytest.fixture
def build_folder(tmp_path):
    """Build output of a single-page app with one script and one stylesheet"""
    build = tmp_path / "build"
    (build / "static" / "js").mkdir(parents=True)
    (build / "static" / "css").mkdir(parents=True)
    (build / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (build / "static" / "js" / "main.a1b2.js").write_text("console.log('picker');", encoding="utf-8")
    (build / "static" / "css" / "main.c3d4.css").write_text("body { margin: 0; }", encoding="utf-8")
    (tmp_path / "build.log").write_text(BUILD_LOG, encoding="utf-8")
    return build


@pytest.fixture
def write_descriptor(tmp_path, build_folder):
    """Write a descriptor next to the build folder and return its path"""

    def _write(filename: str = "input.json", **overrides) -> Path:
        data = {
            "name": EXTENSION_NAME,
            "extension": "field",
            "type": "text",
            "buildFolder": str(build_folder),
            "buildLog": str(tmp_path / "build.log"),
            "replacement": REFERENCE_PATTERN,
            "assetsFolder": ROOT_FOLDER,
            "config": {"colors": ["red", "green"]},
        }
        data.update(overrides)
        data = {k: v for k, v in data.items() if v is not None}

        path = tmp_path / filename
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def load_deployment(write_descriptor):
    """Load a DeploymentConfig from a freshly written descriptor"""

    def _load(**overrides):
        return ConfigLoader().load(write_descriptor(**overrides))

    return _load
