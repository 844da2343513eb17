"""API routes for ClinAudit."""
