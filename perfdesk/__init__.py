"""Performance Desk: employee directory, projects, KPI and appraisal tracking."""
