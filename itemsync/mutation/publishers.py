"""Source and publisher tags attached to store writes."""

UPDATE_FIELD_SOURCE = "MutationEngine.update_field"
UPDATE_BATCH_SOURCE = "MutationEngine.update_batch"
CREATE_SOURCE = "MutationEngine.create_item"
DELETE_SOURCE = "MutationEngine.delete_items"
RECONCILE_SOURCE = "Reconciler.reconcile"
LOCAL_UPDATE_SOURCE = "Reconciler.apply_local_update"

# A blank row inserted inline in the list
NEW_ROW_PUBLISHER = "MutationEngine.create_item.new_row"
# An item added through the list-level "add new item" action
NEW_LIST_ITEM_PUBLISHER = "MutationEngine.create_item.new_list_item"
