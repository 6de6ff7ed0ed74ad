"""Shared pytest fixtures: an in-memory CustomObjectsApi."""

import copy

import pytest
from kubernetes.client.rest import ApiException

from hwprofile_migrator import crd


class FakeCustomObjectsApi:
    """Stores custom objects by (group, plural, namespace, name).

    Mimics the API server where the reconciler depends on it: 404 on a missing
    get or replace, 409 on a duplicate create and 409 on a replace whose
    resourceVersion is stale. Every call is recorded in ``calls``.
    """

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.errors = {}
        self._revision = 0

    def _bump(self, obj):
        self._revision += 1
        obj.setdefault("metadata", {})["resourceVersion"] = str(self._revision)
        return obj

    def add(self, group, plural, obj):
        obj = self._bump(copy.deepcopy(obj))
        metadata = obj["metadata"]
        self.objects[(group, plural, metadata["namespace"], metadata["name"])] = obj
        return copy.deepcopy(obj)

    def find(self, group, plural, namespace, name):
        obj = self.objects.get((group, plural, namespace, name))
        return copy.deepcopy(obj) if obj is not None else None

    def of_kind(self, group, plural):
        return [
            copy.deepcopy(obj)
            for (g, p, _, _), obj in self.objects.items()
            if g == group and p == plural
        ]

    def writes(self, group=None):
        return [
            call
            for call in self.calls
            if call[0] in ("create", "replace") and (group is None or call[1] == group)
        ]

    def _record(self, method, group, **kwargs):
        self.calls.append((method, group, kwargs))
        error = self.errors.get((method, group))
        if error is not None:
            raise error

    @staticmethod
    def _matches(obj, label_selector):
        if not label_selector:
            return True
        labels = obj["metadata"].get("labels") or {}
        for term in label_selector.split(","):
            key, _, value = term.partition("=")
            if labels.get(key) != value:
                return False
        return True

    def list_cluster_custom_object(self, group, version, plural, label_selector=None, **kwargs):
        self._record("list", group, plural=plural, label_selector=label_selector, **kwargs)
        items = [obj for obj in self.of_kind(group, plural) if self._matches(obj, label_selector)]
        return {"items": items}

    def list_namespaced_custom_object(self, group, version, namespace, plural, label_selector=None, **kwargs):
        self._record("list", group, namespace=namespace, plural=plural, label_selector=label_selector, **kwargs)
        items = [
            obj
            for obj in self.of_kind(group, plural)
            if obj["metadata"]["namespace"] == namespace and self._matches(obj, label_selector)
        ]
        return {"items": items}

    def get_namespaced_custom_object(self, group, version, namespace, plural, name, **kwargs):
        self._record("get", group, namespace=namespace, name=name, **kwargs)
        obj = self.find(group, plural, namespace, name)
        if obj is None:
            raise ApiException(status=404, reason="Not Found")
        return obj

    def create_namespaced_custom_object(self, group, version, namespace, plural, body, **kwargs):
        self._record("create", group, namespace=namespace, body=copy.deepcopy(body), **kwargs)
        key = (group, plural, namespace, body["metadata"]["name"])
        if key in self.objects:
            raise ApiException(status=409, reason="AlreadyExists")
        obj = self._bump(copy.deepcopy(body))
        self.objects[key] = obj
        return copy.deepcopy(obj)

    def replace_namespaced_custom_object(self, group, version, namespace, plural, name, body, **kwargs):
        self._record("replace", group, namespace=namespace, name=name, body=copy.deepcopy(body), **kwargs)
        key = (group, plural, namespace, name)
        current = self.objects.get(key)
        if current is None:
            raise ApiException(status=404, reason="Not Found")
        version_sent = body.get("metadata", {}).get("resourceVersion")
        if version_sent != current["metadata"]["resourceVersion"]:
            raise ApiException(status=409, reason="Conflict")
        obj = self._bump(copy.deepcopy(body))
        self.objects[key] = obj
        return copy.deepcopy(obj)


@pytest.fixture
def custom_api():
    return FakeCustomObjectsApi()


def make_legacy_profile(name="test name", namespace="test namespace", annotations=None, **spec):
    """Build a legacy dashboard hardware profile body."""
    body = {
        "apiVersion": f"{crd.LEGACY_GROUP}/{crd.LEGACY_VERSION}",
        "kind": crd.LEGACY_KIND,
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "tolerations": [],
            "nodeSelector": {},
            "identifiers": [],
            **spec,
        },
    }
    if annotations is not None:
        body["metadata"]["annotations"] = annotations
    return body


@pytest.fixture
def add_legacy(custom_api):
    """Store a legacy hardware profile in the fake API and return it."""

    def _add(**kwargs):
        return custom_api.add(crd.LEGACY_GROUP, crd.LEGACY_PLURAL, make_legacy_profile(**kwargs))

    return _add


@pytest.fixture
def legacy_of(custom_api):
    def _get(name="test name", namespace="test namespace"):
        return custom_api.find(crd.LEGACY_GROUP, crd.LEGACY_PLURAL, namespace, name)

    return _get


@pytest.fixture
def target_of(custom_api):
    def _get(name="test name", namespace="test namespace"):
        return custom_api.find(crd.TARGET_GROUP, crd.TARGET_PLURAL, namespace, name)

    return _get
