# Workspace catalog and per-user orchestration
