from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PhoneVerificationChallenge',
            fields=[
                ('phone', models.CharField(max_length=20, primary_key=True, serialize=False)),
                ('code', models.CharField(max_length=6)),
                ('issued_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField()),
            ],
            options={
                'db_table': 'phone_verifications',
            },
        ),
        migrations.CreateModel(
            name='PhoneCodeIssuance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('phone', models.CharField(max_length=20)),
                ('issued_at', models.DateTimeField()),
            ],
            options={
                'db_table': 'phone_code_issuances',
                'ordering': ['-issued_at'],
                'indexes': [models.Index(fields=['phone', 'issued_at'], name='phone_issuance_lookup_idx')],
            },
        ),
        migrations.CreateModel(
            name='VerifiedPhone',
            fields=[
                ('phone', models.CharField(max_length=20, primary_key=True, serialize=False)),
                ('verified_at', models.DateTimeField()),
            ],
            options={
                'db_table': 'verified_phones',
            },
        ),
    ]
