import asyncio
import logging

import kubecrud


async def main():
    kubecrud.configure(level=logging.DEBUG)
    async with kubecrud.Client() as client:
        kubecrud.set_default_client(client)
        for namespace in await kubecrud.Namespace.all():
            print(f"Namespace: {namespace.get_name()}")


if __name__ == '__main__':
    asyncio.run(main())
