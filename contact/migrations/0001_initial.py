from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ContactRecord',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('external_id', models.CharField(db_column='uuid', help_text='Caller-supplied identifier', max_length=100)),
                ('name', models.CharField(db_column='nombre', help_text='Name of the contact', max_length=200)),
                ('email', models.CharField(db_column='correo', help_text='Email address notified on registration', max_length=200)),
                ('phone', models.CharField(db_column='telefono', help_text='Phone number notified on registration', max_length=20)),
                ('created_at', models.DateTimeField(db_column='fecha_creacion', default=django.utils.timezone.now, help_text='When the submission was stored (UTC)')),
            ],
            options={
                'verbose_name': 'Contact Record',
                'verbose_name_plural': 'Contact Records',
                'db_table': 'registros',
                'ordering': ['-created_at'],
            },
        ),
    ]
