"""
Solar plant monitoring service.

Serves plant management, mock live telemetry, bounded per-plant telemetry
history with daily energy rollups, and mock fault/maintenance payloads for
the monitoring dashboard.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""
