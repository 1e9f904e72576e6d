import click
from faker import Faker
from flask.cli import with_appcontext
from sqlalchemy import delete, select

from impactsite.extensions import db

fake = Faker()


@click.command("seed-content")
@click.option("--messages", default=5, show_default=True, help="Sample contact messages to generate.")
@click.option("--clear", is_flag=True, help="Delete existing rows first.")
@click.option("--seed", "faker_seed", type=int, default=None, help="Faker seed for repeatable data.")
@with_appcontext
def seed_content(messages, clear, faker_seed):
    """Seed programs, blog posts and sample contact messages."""
    # lazy imports to prevent circular imports
    from impactsite.content import SEED_BLOG_POSTS, SEED_PROGRAMS
    from impactsite.forms import parse_iso8601
    from impactsite.models import available_models
    from impactsite.schemas import BLOG_POST_SCHEMA, CONTACT_SCHEMA, PROGRAM_SCHEMA

    models = available_models()
    Program, BlogPost, ContactMessage = models["Program"], models["BlogPost"], models["ContactMessage"]

    if faker_seed is not None:
        Faker.seed(faker_seed)

    if clear:
        for name in ("Donation", "ContactMessage", "BlogPost", "Program"):
            deleted = db.session.execute(delete(models[name])).rowcount
            click.secho(f"🧹 Cleared {deleted} {name} rows", fg="yellow")
        db.session.commit()

    click.echo("🌱 Seeding programs...")
    for record in SEED_PROGRAMS:
        result = PROGRAM_SCHEMA.validate(record)
        if not result.valid:
            raise click.ClickException(f"Invalid seed program {record['title']!r}: {result.summary()}")
        program = db.session.scalars(select(Program).filter_by(title=result.value["title"])).first()
        if program:
            click.echo(f"🔁 Updating existing program: {program.title}")
        else:
            program = Program()
            db.session.add(program)
            click.echo(f"✨ Created program: {result.value['title']}")
        program.apply(result.value)

    click.echo("🌱 Seeding blog posts...")
    for record in SEED_BLOG_POSTS:
        result = BLOG_POST_SCHEMA.validate(record)
        if not result.valid:
            raise click.ClickException(f"Invalid seed post {record['title']!r}: {result.summary()}")
        value = dict(result.value)
        value["published_at"] = parse_iso8601(value["published_at"]).replace(tzinfo=None)
        post = db.session.scalars(select(BlogPost).filter_by(title=value["title"])).first()
        if post:
            click.echo(f"🔁 Updating existing post: {post.title}")
            for k, v in value.items():
                setattr(post, k, v)
        else:
            db.session.add(BlogPost(**value))
            click.echo(f"✨ Created post: {value['title']}")

    added = 0
    for _ in range(messages):
        result = CONTACT_SCHEMA.validate(
            {
                "name": fake.name(),
                "email": fake.free_email(),
                "subject": fake.sentence(nb_words=5).rstrip("."),
                "message": fake.paragraph(nb_sentences=3),
            }
        )
        if result.valid:
            db.session.add(ContactMessage(**result.value))
            added += 1
    if added:
        click.echo(f"✉️  Added {added} sample contact messages")

    db.session.commit()
    click.secho("✅ Content seeded!", fg="bright_green", bold=True)
