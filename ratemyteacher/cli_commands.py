import csv

from flask.cli import with_appcontext
import click
from ratemyteacher.extensions import db
from ratemyteacher.models.teacher import Teacher, addTeacher, parse_subjects


@click.command('add-teacher')
@click.argument('full_name')
@click.option('--subjects', default='', help='Comma separated subjects, primary first.')
@with_appcontext
def add_teacher(full_name, subjects):
    """Add one teacher."""
    teacher = addTeacher(full_name, subjects)
    click.echo(f'Teacher {teacher.id} created: {teacher.full_name} ({", ".join(teacher.subjects) or "no subjects"})')


@click.command('import-teachers')
@click.argument('csv_file', type=click.File('r', encoding='utf-8'))
@with_appcontext
def import_teachers(csv_file):
    """Import teachers from a CSV with columns full_name, subjects.

    Teachers whose name already exists are skipped.
    """
    created = skipped = 0
    try:
        for row in csv.DictReader(csv_file):
            name = (row.get('full_name') or '').strip()
            if not name or Teacher.query.filter_by(full_name=name).first():
                skipped += 1
                continue
            teacher = Teacher(full_name=name)
            teacher.set_subjects(parse_subjects(row.get('subjects')))
            db.session.add(teacher)
            created += 1
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        raise click.ClickException(f'Import failed: {e}')
    click.echo(f'Imported {created} teachers, skipped {skipped}.')


def register_commands(app):
    app.cli.add_command(add_teacher)
    app.cli.add_command(import_teachers)
