from enum import Enum


class Keywords(Enum):
    LATEST_VERSION = '$LATEST'
    FUNCTION = 'function'
    LAYER = 'layer'

    # lifecycle events the plugin hooks into
    PRUNE_EVENT = 'prune:prune'
    POST_DEPLOY_EVENT = 'after:deploy:deploy'
