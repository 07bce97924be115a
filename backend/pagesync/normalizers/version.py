import copy


def normalize_version(version):
    return {
        "id": version.id,
        "parentId": version.page_id,
        "version": version.version,
        "status": version.status,
        "versionedFields": copy.deepcopy(version.snapshot),
        "autosave": bool(version.autosave),
        "createdAt": version.created_at.isoformat() if version.created_at else None,
    }
