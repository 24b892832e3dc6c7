from django.db import migrations


def create_roles(apps, schema_editor):
    Role = apps.get_model('account', 'Role')
    for name in ['ADMIN', 'WARDEN']:
        Role.objects.get_or_create(name=name)


class Migration(migrations.Migration):

    dependencies = [
        ('account', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_roles, migrations.RunPython.noop),
    ]
