from fastapi import APIRouter, Depends

from app.dependencies import get_settings_store
from app.models import User
from app.models.activity_log import ActionType
from app.models.property_settings import PropertyId
from app.schemas.property import PropertySettingsUpdate, PropertySettingsResponse
from app.services.activity_service import log_activity
from app.services.settings_service import SettingsStore
from app.utils.security import get_current_user

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("/", response_model=list[PropertySettingsResponse])
def get_properties(store: SettingsStore = Depends(get_settings_store)):
    return list(store.load().values())


@router.get("/{property_id}", response_model=PropertySettingsResponse)
def get_property(property_id: PropertyId, store: SettingsStore = Depends(get_settings_store)):
    return store.get(property_id)


@router.put("/{property_id}", response_model=PropertySettingsResponse)
def update_property(
    property_id: PropertyId,
    data: PropertySettingsUpdate,
    current_user: User = Depends(get_current_user),
    store: SettingsStore = Depends(get_settings_store)
):
    old_name = store.display_name(property_id)
    saved = store.save(property_id, data.model_dump())

    log_activity(
        db=store.db,
        entity_type="property",
        entity_id=property_id.value,
        user_id=current_user.id,
        action_type=ActionType.SETTINGS_CHANGED,
        description="Einstellungen der Wohnung geändert",
        old_value=old_name,
        new_value=saved["name"]
    )
    return saved
