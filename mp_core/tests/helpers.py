# mp_core/tests/helpers.py

def scoped(tenant, facility):
    return {
        "HTTP_X_TENANT_ID": str(tenant.id),
        "HTTP_X_FACILITY_ID": str(facility.id),
    }


def actor(user, tenant, facility):
    """Keyword scope for service calls made on behalf of `user`."""
    return {"tenant_id": tenant.id, "facility_id": facility.id, "actor_user_id": user.id}
