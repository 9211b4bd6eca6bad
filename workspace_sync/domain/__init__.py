# Domain layer
#
#   +------------------+       +------------------+
#   |  Content Cache   |       |  Progress Store  |   (shared, generate-once) / (per user, sparse)
#   +------------------+       +------------------+
#            \                        /
#             \                      /
#              v                    v
#          +----------------------------+
#          |       Overlay Merger       |   (pure, per request)
#          +----------------------------+
#                        |
#                        v
#               +-----------------+
#               | Metrics Engine  |   (recomputed from scratch)
#               +-----------------+
#
# Follow-Up Mutator and Detail Writer are the only writers of cached content.
