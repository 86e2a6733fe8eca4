"""Cross-cutting helpers shared by every cmscore layer (enums, telemetry)."""
