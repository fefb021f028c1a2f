import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(max_length=255, unique=True)),
                ('slug', models.SlugField(max_length=255, unique=True)),
                ('ativo', models.BooleanField(default=True)),
                ('glpi_url', models.CharField(help_text="URL da API do GLPI (ex.: 'https://chamados.exemplo.com/apirest.php')", max_length=512)),
                ('glpi_app_token', models.CharField(max_length=255)),
                ('glpi_user_login', models.CharField(max_length=255)),
                ('glpi_user_password', models.CharField(max_length=255)),
                ('status_filter', models.CharField(default='10', help_text="Status buscados por padrão ('10' = todos, ou lista como '1,2')", max_length=50)),
                ('auto_assign_enabled', models.BooleanField(default=True)),
                ('auto_categorize_enabled', models.BooleanField(default=True, help_text='Reservado para categorização automática (ainda sem efeito)')),
                ('tempo_urg_prio_5', models.PositiveIntegerField(default=10, help_text='Minutos de espera antes de atribuir automaticamente chamados de urgência 5')),
                ('tempo_urg_prio_4', models.PositiveIntegerField(default=30, help_text='Minutos de espera antes de atribuir automaticamente chamados de urgência 4')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Tenant',
                'verbose_name_plural': 'Tenants',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='DailyStats',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('data', models.DateTimeField(help_text='Momento do último cálculo')),
                ('chamados_disponiveis', models.PositiveIntegerField(default=0)),
                ('chamados_atribuidos', models.PositiveIntegerField(default=0)),
                ('chamados_planejados', models.PositiveIntegerField(default=0)),
                ('chamados_pendentes', models.PositiveIntegerField(default=0)),
                ('total', models.PositiveIntegerField(default=0)),
                ('tenant', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='daily_stats', to='tenants.tenant')),
            ],
            options={
                'verbose_name': 'Estatística diária',
                'verbose_name_plural': 'Estatísticas diárias',
            },
        ),
        migrations.CreateModel(
            name='TechnicianSkill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('technician_id', models.IntegerField(help_text='ID do usuário técnico no GLPI')),
                ('technician_name', models.CharField(blank=True, default='', max_length=255)),
                ('category_name', models.CharField(help_text="Categoria como exibida nos chamados (ex.: 'TI > Acesso > Senha')", max_length=1024)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='technician_skills', to='tenants.tenant')),
            ],
            options={
                'verbose_name': 'Competência de técnico',
                'verbose_name_plural': 'Competências de técnicos',
                'ordering': ['technician_id'],
                'constraints': [models.UniqueConstraint(fields=('tenant', 'technician_id', 'category_name'), name='unique_skill_per_technician')],
            },
        ),
    ]
