import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Carrier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=200)),
                ('logo_path', models.CharField(blank=True, max_length=500)),
                ('contact_phone', models.CharField(blank=True, max_length=30)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['company_name'],
            },
        ),
        migrations.CreateModel(
            name='PickupOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('location', models.CharField(blank=True, db_index=True, max_length=100)),
                ('delivery_zip', models.CharField(blank=True, max_length=10)),
                ('delivery_postal_code', models.CharField(blank=True, max_length=10)),
                ('delivery_address', models.CharField(blank=True, max_length=200)),
                ('delivery_city', models.CharField(blank=True, max_length=100)),
                ('number_of_packages', models.PositiveIntegerField(blank=True, null=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('photo_url', models.CharField(blank=True, max_length=500)),
                ('comment', models.TextField(blank=True)),
                ('reference', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('delivered', 'Delivered')], default='pending', max_length=20)),
                ('delivered_by', models.CharField(blank=True, max_length=100)),
                ('delivered_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='CarrierOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('shelf_number', models.PositiveIntegerField(blank=True, null=True)),
                ('driver_name', models.CharField(blank=True, max_length=100)),
                ('driver_phone', models.CharField(blank=True, max_length=30, null=True)),
                ('signature_data', models.TextField(blank=True, help_text='PNG data URL from the signature pad', null=True)),
                ('picked_up_at', models.DateTimeField(blank=True, null=True)),
                ('carrier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='carrier_orders', to='pickup.carrier')),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='carrier_order', to='pickup.pickuporder')),
            ],
            options={
                'indexes': [models.Index(fields=['carrier', 'picked_up_at'], name='pickup_carrier_pickedup_idx')],
            },
        ),
    ]
