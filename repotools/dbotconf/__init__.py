"""Generate and verify Dependabot configuration for a repository."""