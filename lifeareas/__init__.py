"""LifeAreas core library — goal lists, reflections and asset tracking.

Public API re-exports for convenient imports:
    from lifeareas import load_collection, add_item, filter_reflections, ...
"""

# Workspace & config
from lifeareas.workspace import (
    workspace_root,
    store_path,
    profile_path,
    hooks_config_path,
    load_settings,
    init_workspace,
    open_store,
    get_user_timezone,
    now_local,
    configure_logging,
)

# Store
from lifeareas.store import (
    Store,
    StoreError,
    MemoryStore,
    JsonFileStore,
)

# Areas
from lifeareas.areas import (
    AREAS,
    DEFAULT_ASSETS,
    FINANCE_ASSETS_KEY,
    REFLECTIONS_KEY,
    get_area,
)

# Goal lists
from lifeareas.collection import (
    ItemCollection,
    load_collection,
    find_item,
    add_item,
    delete_item,
    toggle_item,
    edit_item,
    reorder_items,
)

# Reordering
from lifeareas.reorder import (
    Box,
    DragSession,
    drop_anchor,
    insert_before,
    move_id,
    commit_drop,
)

# Projection
from lifeareas.projector import (
    EditSession,
    begin_edit,
    save_edit,
    cancel_edit,
    carry_edit,
    project_items,
    rerender,
)

# Reflections
from lifeareas.reflections import (
    ReflectionLog,
    load_reflections,
    add_reflection,
    delete_reflection,
    request_reflection_removal,
    filter_reflections,
    project_reflections,
    format_reflection_date,
    category_options,
)

# Assets
from lifeareas.assets import (
    AssetCollection,
    AssetEditSession,
    load_assets,
    add_asset,
    begin_asset_edit,
    edit_asset,
    delete_asset,
    replacement_date,
    project_assets,
)

# Timers
from lifeareas.timers import (
    Scheduler,
    ThreadingScheduler,
    Debouncer,
    DeferredRemoval,
)

# Hooks
from lifeareas.hooks import run_hooks, completion_hook

from lifeareas.hydration import daily_water_ml, parse_weight

# Models
from lifeareas.models import (
    Item,
    Asset,
    Reflection,
    Settings,
    ItemView,
    AssetRow,
    ReflectionCard,
    AreaDefinition,
)
