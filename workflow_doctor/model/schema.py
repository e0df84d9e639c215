# workflow_doctor/model/schema.py
#
# Only the shape the doctor relies on is constrained here: a `nodes` array of
# objects. Node and workflow names/types are left to the loader, which turns
# missing, null or non-string values into text so one odd node never rejects
# the whole export.
N8N_EXPORT_SCHEMA = {
    "type": "object",
    "required": ["nodes"],
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": True
            }
        },

        # Opaque to the doctor; only its container type is checked.
        "connections": {
            "type": ["object", "null"]
        }
    },
    "additionalProperties": True
}
