import asyncio
import logging

import kubecrud


async def main():
    kubecrud.configure(level=logging.DEBUG, log_format=kubecrud.LogFormat.PLAIN)
    async with kubecrud.Client() as client:
        kubecrud.set_default_client(client)

        cm = kubecrud.ConfigMap(metadata={'name': 'kubecrud-example', 'namespace': 'default'})
        cm.set_labels({'app': 'kubecrud-example'})
        cm.add_data('greeting', 'hello')
        await cm.save()  # created, or updated if it already exists
        print(f"Saved with resourceVersion={cm.get_resource_version()}")

        cm.add_data('farewell', 'good bye')
        await cm.save()  # updated

        found = await kubecrud.ConfigMap.find_one_by_labels({'app': 'kubecrud-example'}, 'default')
        print(f"Found: {found!r} with {found.data if found else None}")

        await cm.delete()
        print(f"Still exists: {await cm.exists()}")


if __name__ == '__main__':
    asyncio.run(main())
