# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - storage: Contact repositories (MongoDB, in-memory)
