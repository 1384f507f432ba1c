"""FoodTech Workflow CLI tool (foodtechctl)."""

import csv

import typer

app = typer.Typer(name="foodtechctl", help="FoodTech Workflow CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql
    from sqlalchemy.engine import make_url
    from foodtech.core.config import settings

    url = make_url(settings.DATABASE_URL)
    conn = pymysql.connect(
        host=url.host or "localhost",
        port=url.port or 3306,
        user=url.username,
        password=url.password or "",
    )
    try:
        cursor = conn.cursor()
        cursor.execute(
            f"CREATE DATABASE IF NOT EXISTS `{url.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
        typer.echo(f"✅ Database '{url.database}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    import foodtech.models  # noqa: F401
    from foodtech.db.base import Base
    from foodtech.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed():
    """Seed the admin profile."""
    from foodtech.db.session import SessionLocal
    from foodtech.db.seeds.seed_admin import seed_admin

    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
    typer.echo("✅ Seeds applied")


def read_users_csv(path: str) -> list[dict]:
    """Rows of an ``email,name,role`` CSV; name and role may be blank."""
    with open(path, newline="", encoding="utf-8") as f:
        rows = []
        for row in csv.DictReader(f):
            email = (row.get("email") or "").strip()
            if not email:
                continue
            rows.append({
                "email": email,
                "name": (row.get("name") or "").strip() or None,
                "role": (row.get("role") or "").strip() or None,
            })
        return rows


@app.command("import-users")
def import_users(
    csv_path: str = typer.Argument(..., help="CSV file with email,name,role columns"),
    send_invites: bool = typer.Option(True, help="Email set-password invites"),
):
    """Provision users from a CSV file."""
    from foodtech.db.session import SessionLocal
    from foodtech.services.user_admin_service import user_admin_service

    users = read_users_csv(csv_path)
    db = SessionLocal()
    try:
        results = user_admin_service.import_users(db, users, send_invites=send_invites)
    finally:
        db.close()

    for r in results:
        if r["success"]:
            typer.echo(f"  ✅ {r['email']}")
        else:
            typer.echo(f"  ❌ {r['email']}: {r['error']}")
    imported = sum(1 for r in results if r["success"])
    typer.echo(f"{imported} imported, {len(results) - imported} failed")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("foodtech.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
