"""
Bootstrap a development tenant.

Creates a tenant with an owner membership and an empty token balance,
then prints a bearer token for the owner so the payment endpoints can be
called locally.
"""
import argparse
import asyncio

from billing.core.security import create_access_token
from billing.infrastructure.database import get_session, init_db
from billing.modules.balances import BalanceService
from billing.modules.tenants import TenantService


async def create_tenant(name: str, owner_id: str, tenant_id: str | None) -> None:
    await init_db()

    async for db in get_session():
        tenants = TenantService.with_session(db)
        if tenant_id and await tenants.get_tenant(tenant_id):
            print(f"Tenant already exists: {tenant_id}")
        else:
            tenant = await tenants.create_tenant(name, owner_id=owner_id, tenant_id=tenant_id)
            await BalanceService.with_session(db).ensure_balance(tenant.id)
            await db.commit()
            tenant_id = tenant.id
            print(f"Tenant created: {tenant.name} ({tenant.id})")

    print(f"Owner: {owner_id}")
    print(f"Bearer token: {create_access_token(owner_id)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a development tenant")
    parser.add_argument("--name", default="Demo Agency")
    parser.add_argument("--owner", default="dev-owner")
    parser.add_argument("--tenant-id", default=None)
    args = parser.parse_args()
    asyncio.run(create_tenant(args.name, args.owner, args.tenant_id))


if __name__ == "__main__":
    main()
