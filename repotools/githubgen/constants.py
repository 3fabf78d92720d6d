"""Fixed text used by the GitHub file generators."""

START_COMPONENT_LIST = "# Start Collector components list"
END_COMPONENT_LIST = "# End Collector components list"
DEPRECATED_LIST_HEADER = "## DEPRECATED components\n"
UNMAINTAINED_LIST_HEADER = "\n## UNMAINTAINED components\n"
UNMAINTAINED_STATUS = "unmaintained"

ALLOWLIST_HEADER = """# Code generated by githubgen. DO NOT EDIT.
#####################################################
#
# List of components
# waiting on owners to be assigned
#
#####################################################
#
# Learn about CODEOWNERS file format in the GitHub documentation.
#

## 
# NOTE: New components MUST have one or more codeowners. Add codeowners to the component metadata.yaml and run make gengithub
##

"""

UNMAINTAINED_HEADER = """
#####################################################
#
## UNMAINTAINED components
#
#####################################################
"""

CODEOWNERS_HEADER = """# Code generated by githubgen. DO NOT EDIT.
#####################################################
#
# List of codeowners
#
#####################################################
#
# Learn about CODEOWNERS file format in the GitHub documentation.
#

* %s
"""

DISTRIBUTION_CODEOWNERS_HEADER = """
#####################################################
#
# List of distribution maintainers
#
#####################################################
"""