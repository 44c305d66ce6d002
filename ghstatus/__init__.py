"""ghstatus: an async client for GitHub commit statuses."""

from __future__ import annotations
