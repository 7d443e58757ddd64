import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('SUPER_ADMIN', 'Super administrador'), ('ADMIN', 'Administrativo'), ('MEDICO', 'Médico')], db_index=True, default='ADMIN', max_length=20)),
                ('ci', models.CharField(blank=True, max_length=12, null=True, unique=True)),
                ('nombre', models.CharField(blank=True, max_length=255)),
                ('cargo', models.CharField(blank=True, max_length=120)),
                ('especialidad', models.CharField(blank=True, max_length=120)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='AuthorizedPersonnel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('ci', models.CharField(max_length=12, unique=True)),
                ('nombre_completo', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('rol_autorizado', models.CharField(choices=[('ADMIN', 'Administrativo'), ('MEDICO', 'Médico')], db_index=True, max_length=20)),
                ('departamento', models.CharField(blank=True, max_length=120)),
                ('cargo', models.CharField(blank=True, max_length=120)),
                ('fecha_ingreso', models.DateField()),
                ('fecha_vencimiento', models.DateField(blank=True, null=True)),
                ('estado', models.CharField(choices=[('ACTIVO', 'Activo'), ('INACTIVO', 'Inactivo')], db_index=True, default='ACTIVO', max_length=10)),
                ('registrado', models.BooleanField(default=False)),
                ('motivo_baja', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='authorized_personnel', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nro_historia', models.CharField(max_length=8, unique=True)),
                ('ci', models.CharField(max_length=12, unique=True)),
                ('apellidos_nombres', models.CharField(db_index=True, max_length=255)),
                ('fecha_nacimiento', models.DateField(blank=True, null=True)),
                ('sexo', models.CharField(blank=True, choices=[('M', 'Masculino'), ('F', 'Femenino')], max_length=1)),
                ('nacionalidad', models.CharField(blank=True, max_length=60)),
                ('direccion', models.CharField(blank=True, max_length=255)),
                ('telefono', models.CharField(blank=True, max_length=20)),
                ('lugar_nacimiento', models.CharField(blank=True, max_length=120)),
                ('estado', models.CharField(blank=True, max_length=60)),
                ('region', models.CharField(blank=True, max_length=60)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='patients_created', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='MilitaryRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('grado', models.CharField(blank=True, max_length=60)),
                ('componente', models.CharField(blank=True, max_length=60)),
                ('unidad', models.CharField(blank=True, max_length=120)),
                ('patient', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='militar', to='records.patient')),
            ],
        ),
        migrations.CreateModel(
            name='Admission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(blank=True, choices=[('EMERGENCIA', 'Emergencia'), ('HOSPITALIZACION', 'Hospitalización')], max_length=20, null=True)),
                ('servicio', models.CharField(blank=True, max_length=60, null=True)),
                ('fecha_admision', models.DateField(db_index=True)),
                ('hora_admision', models.CharField(blank=True, max_length=32, null=True)),
                ('forma_ingreso', models.CharField(choices=[('AMBULANTE', 'Ambulante'), ('AMBULANCIA', 'Ambulancia'), ('TRANSFERENCIA', 'Transferencia')], default='AMBULANTE', max_length=20)),
                ('habitacion', models.CharField(blank=True, max_length=20)),
                ('cama', models.CharField(blank=True, max_length=20)),
                ('diagnostico', models.TextField(blank=True)),
                ('observaciones', models.TextField(blank=True)),
                ('fecha_alta', models.DateField(blank=True, null=True)),
                ('estado', models.CharField(choices=[('ACTIVA', 'Activa'), ('ALTA', 'Alta')], db_index=True, default='ACTIVA', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='admissions_created', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='admisiones', to='records.patient')),
            ],
            options={
                'indexes': [models.Index(fields=['patient', 'fecha_admision'], name='admision_patient_fecha_idx')],
            },
        ),
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField(db_index=True)),
                ('hora', models.CharField(blank=True, max_length=32)),
                ('especialidad', models.CharField(max_length=120)),
                ('motivo', models.TextField(blank=True)),
                ('estado', models.CharField(choices=[('PROGRAMADA', 'Programada'), ('COMPLETADA', 'Completada'), ('CANCELADA', 'Cancelada')], db_index=True, default='PROGRAMADA', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments_created', to=settings.AUTH_USER_MODEL)),
                ('medico', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='appointments_assigned', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='citas', to='records.patient')),
            ],
            options={
                'indexes': [models.Index(fields=['fecha', 'estado'], name='cita_fecha_estado_idx')],
            },
        ),
        migrations.CreateModel(
            name='Encounter',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(choices=[('EMERGENCIA', 'Emergencia'), ('HOSPITALIZACION', 'Hospitalización'), ('CONSULTA', 'Consulta'), ('OTRO', 'Otro')], db_index=True, max_length=20)),
                ('fecha', models.DateField(db_index=True)),
                ('hora', models.CharField(blank=True, max_length=32)),
                ('motivo_consulta', models.TextField(blank=True)),
                ('enfermedad_actual', models.TextField(blank=True)),
                ('procedencia', models.CharField(blank=True, max_length=120)),
                ('nro_cama', models.CharField(blank=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admision', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='encuentros', to='records.admission')),
                ('cita', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='encuentro', to='records.appointment')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='encounters_created', to=settings.AUTH_USER_MODEL)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='encuentros', to='records.patient')),
            ],
            options={
                'indexes': [models.Index(fields=['patient', 'fecha'], name='encuentro_patient_fecha_idx')],
            },
        ),
        migrations.CreateModel(
            name='VitalSigns',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('ta_sistolica', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('ta_diastolica', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('pulso', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('temperatura', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('fr', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('observaciones', models.TextField(blank=True)),
                ('registrado_en', models.DateTimeField(auto_now_add=True)),
                ('encuentro', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='signos_vitales', to='records.encounter')),
            ],
        ),
        migrations.CreateModel(
            name='DiagnosticImpression',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('codigo_cie', models.CharField(blank=True, max_length=10)),
                ('descripcion', models.TextField(blank=True)),
                ('clase', models.CharField(blank=True, max_length=40)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('encuentro', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='impresiones', to='records.encounter')),
            ],
        ),
        migrations.CreateModel(
            name='HospitalizationFormat',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('admision', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='formato', to='records.admission')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='formatos', to='records.patient')),
            ],
        ),
        migrations.CreateModel(
            name='FormatVitalSigns',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField()),
                ('hora', models.CharField(blank=True, max_length=32)),
                ('ta_sistolica', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('ta_diastolica', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('pulso', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('temperatura', models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ('fr', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('saturacion', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('observaciones', models.TextField(blank=True)),
                ('formato', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='signos_vitales', to='records.hospitalizationformat')),
            ],
        ),
        migrations.CreateModel(
            name='LabResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField()),
                ('examen', models.CharField(max_length=120)),
                ('resultado', models.TextField(blank=True)),
                ('observaciones', models.TextField(blank=True)),
                ('formato', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='laboratorios', to='records.hospitalizationformat')),
            ],
        ),
        migrations.CreateModel(
            name='MedicalOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField()),
                ('hora', models.CharField(blank=True, max_length=32)),
                ('indicacion', models.TextField()),
                ('ejecutada', models.BooleanField(default=False)),
                ('formato', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ordenes_medicas', to='records.hospitalizationformat')),
            ],
        ),
        migrations.CreateModel(
            name='MedicalEvolution',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fecha', models.DateField()),
                ('hora', models.CharField(blank=True, max_length=32)),
                ('nota', models.TextField()),
                ('formato', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='evoluciones_medicas', to='records.hospitalizationformat')),
                ('medico', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='evoluciones', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='AdmissionSummary',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('motivo_ingreso', models.TextField(blank=True)),
                ('diagnostico_ingreso', models.TextField(blank=True)),
                ('plan', models.TextField(blank=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('formato', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='resumen_ingreso', to='records.hospitalizationformat')),
            ],
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.BigIntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
                ],
            },
        ),
    ]
