import logging
import os

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8001"


class ApiClientError(Exception):
    def __init__(self, status, message, errors=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []


class ApiClient:
    """Calls the task manager REST API on behalf of a :class:`Session`."""

    def __init__(self, session, base_url=None, http=None, timeout=10):
        self.session = session
        self.base_url = (base_url or os.environ.get("TASKMANAGER_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, json=None, params=None, auth=True):
        headers = {"Content-Type": "application/json"}
        if auth and self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ApiClientError(None, f"Cannot reach {self.base_url}: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code == 401 and auth:
            logger.info("Session rejected by server; signing out")
            self.session.clear()

        if resp.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ApiClientError(resp.status_code, message or f"HTTP {resp.status_code}", errors)
        return body

    def _authenticate(self, path, payload):
        data = self._request("POST", path, json=payload, auth=False)
        self.session.set(data["token"], data["user"])
        self.session.save()
        return data["user"]

    def register(self, name, email, password):
        return self._authenticate("/api/auth/register", {"name": name, "email": email, "password": password})

    def login(self, email, password):
        return self._authenticate("/api/auth/login", {"email": email, "password": password})

    def logout(self):
        self.session.clear()

    def me(self):
        user = self._request("GET", "/api/auth/me")
        self.session.user = user
        return user

    def list_tasks(self, status=None, priority=None, search=None, sort_by=None, order=None):
        params = {
            "status": status,
            "priority": priority,
            "search": search,
            "sortBy": sort_by,
            "order": order,
        }
        return self._request("GET", "/api/tasks", params={k: v for k, v in params.items() if v})

    def get_task(self, task_id):
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, data):
        return self._request("POST", "/api/tasks", json=data)

    def update_task(self, task_id, data):
        return self._request("PUT", f"/api/tasks/{task_id}", json=data)

    def delete_task(self, task_id):
        return self._request("DELETE", f"/api/tasks/{task_id}")

    def get_stats(self):
        return self._request("GET", "/api/tasks/stats/summary")

    def health(self):
        return self._request("GET", "/api/health", auth=False)
