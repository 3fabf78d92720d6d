"""Generate CODEOWNERS, allowlists, issue-template component lists and distribution reports."""